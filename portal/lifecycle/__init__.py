"""Content lifecycle engine"""
