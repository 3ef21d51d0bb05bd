"""
Utility modules: configuration, constants, spreadsheet access and text helpers.
"""
