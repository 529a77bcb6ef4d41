"""Pool service back office API"""
