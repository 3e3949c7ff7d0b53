# Crowdfunding Service Contracts

"""
Crowdfunding Service Contract Module

This module contains:
- data_contract.py: test data factories and request builders for the
  campaign ledger
"""
