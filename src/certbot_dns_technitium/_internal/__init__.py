"""Internal implementation of `~certbot_dns_technitium` plugin."""
