"""Route groups for the Renewal Prediction API.

This module collects logically-related endpoints:
- health: service status, model load flags and asset checks
- misc: feature lists and defaults the client needs to build requests
- predict: renewal probability and months-to-renewal predictions
"""
