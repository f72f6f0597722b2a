"""WalletHub Core API - user accounts backed by a relational store."""
