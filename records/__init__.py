"""Clinic records application.

This package contains the account and patient models, the Google
sign-in flow, the role resolver and access guard, and the API and page
routes that sit behind them.
"""
