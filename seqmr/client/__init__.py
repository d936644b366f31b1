"""Command line client, output writing and plots"""
