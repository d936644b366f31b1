"""Data types and collaborator contracts shared by coordinator and worker"""
