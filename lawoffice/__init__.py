"""Law office website API: public content, operator auth and a small CMS."""
