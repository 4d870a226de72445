"""Member tiers (BASIC, BUSINESS) referenced by profiles."""
