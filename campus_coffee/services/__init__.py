"""POS domain services"""
