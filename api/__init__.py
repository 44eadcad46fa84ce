"""
HTTP endpoint serving the Salesforce opportunity feed to the dashboard.
"""
