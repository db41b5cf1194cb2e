"""Authentication components"""
