"""User interface"""
