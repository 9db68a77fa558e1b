"""Memo collection: storage, queries and the monthly activity stats."""
