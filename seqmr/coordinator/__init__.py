"""Workflow orchestration and run metrics"""
