"""HTTP surface of the portal"""
