"""Core settings, database, logging, errors and events"""
