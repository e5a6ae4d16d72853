"""
Pantry AI
Structured extraction for the pantry, recipe and nutrition assistants.
"""
