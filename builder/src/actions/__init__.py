"""User interaction handlers"""
