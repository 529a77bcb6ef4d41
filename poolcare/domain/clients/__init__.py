"""Clients and their service locations"""
