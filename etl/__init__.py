"""
Extract and transform stages for the Salesforce opportunity feed.
"""
