"""Appointment listing, filters and status workflow"""
