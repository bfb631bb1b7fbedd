"""Session mixins"""
