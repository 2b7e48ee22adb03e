"""
Supporting utilities: configuration, logging, export and system information.
"""
