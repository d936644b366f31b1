"""Sources and user-function adapters"""
