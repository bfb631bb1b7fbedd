"""Shared utilities: history, logging, coordinate transforms"""
