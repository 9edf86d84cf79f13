"""
Data models for storeadmin.

- Review: admin view of a user review
- FilterState / ReviewView: review list state and output
- Checkout: checkout session and sale records
"""
