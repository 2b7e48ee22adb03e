"""
Installed program discovery: registry access, program records and listing.
"""
