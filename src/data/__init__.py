"""Persistence layer: relational store, session cache and mapped models."""
