"""Cleaner (staff) records and availability"""
