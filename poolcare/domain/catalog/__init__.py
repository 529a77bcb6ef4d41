"""Service type and service task catalogue"""
