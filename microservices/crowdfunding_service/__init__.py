"""
Crowdfunding Service

Campaign and contribution ledger microservice providing:
- Campaign creation with a goal amount and deadline
- Contributions from identified principals with race-free running totals
- Derived campaign status (Active / Funded / Ended)
- Search, status filters and sorting over campaigns

Port: 8250
"""

__version__ = "1.0.0"
__service__ = "crowdfunding_service"
