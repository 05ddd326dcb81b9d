"""
Settings modules shipped with rail-cms.
"""
