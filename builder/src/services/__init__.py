"""Rendering, layout and export services"""
