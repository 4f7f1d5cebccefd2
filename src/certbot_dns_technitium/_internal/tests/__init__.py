"""certbot-dns-technitium tests"""
