"""User profiles (one per user) linking users to a member tier."""
