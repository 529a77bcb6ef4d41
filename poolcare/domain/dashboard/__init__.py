"""Daily overview"""
