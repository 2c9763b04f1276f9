"""Mental-health call triage backend"""
