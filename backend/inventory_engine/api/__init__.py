"""Inventory Engine API"""
