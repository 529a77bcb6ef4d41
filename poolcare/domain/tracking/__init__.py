"""Live map of in-progress jobs and completed-job history"""
