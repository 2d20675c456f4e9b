"""Command line client for the loan API"""
