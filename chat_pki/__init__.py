"""
Certificate-authority bootstrap service for the chat backend.
"""
