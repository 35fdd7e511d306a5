"""Core infrastructure: configuration, database, authentication"""
