"""
storeadmin - store administration client.

Admin review moderation (list, filter, delete) and the checkout REST client.
"""
