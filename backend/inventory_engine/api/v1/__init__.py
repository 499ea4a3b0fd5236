"""API version 1"""
