"""Desktop widgets"""
