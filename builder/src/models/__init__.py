"""
Bouquet Builder - Data Models

Data model classes for the bouquet composition engine. This is the MODEL
layer: pure data, no rendering and no Qt.

Public API: import ArrangementModel and Item from models.arrangement.
models/arrangement/_internal/ holds implementation only.
"""
