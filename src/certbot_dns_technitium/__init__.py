"""
The `~certbot_dns_technitium.dns_technitium` plugin automates the process of
completing a ``dns-01`` challenge (`~acme.challenges.DNS01`) by creating, and
subsequently removing, TXT records using the Technitium DNS Server HTTP API.

The same record handling is available to other ACME orchestrators through
`certbot_dns_technitium.solver`.


Named Arguments
---------------

==========================================  ===================================
``--dns-technitium-credentials``            Technitium DNS Server credentials_
                                            INI file. (Required)
``--dns-technitium-propagation-seconds``    The number of seconds to wait for
                                            DNS to propagate before asking the
                                            ACME server to verify the DNS
                                            record. (Default: 60)
==========================================  ===================================


Credentials
-----------

Use of this plugin requires a configuration file containing the address of
the Technitium DNS Server web service and an API token, created from the
server's web console under `Administration > Sessions > Create Token`. The
token's user needs permission to modify the zones you need certificates for.

The zone holding the TXT record is found by asking the server about
progressively shorter suffixes of the record name, most specific first. Set
``dns_technitium_zone`` to skip the search and always use one zone.

.. code-block:: ini
   :name: credentials.ini
   :caption: Example credentials file:

   # Technitium DNS Server API credentials used by Certbot
   dns_technitium_server_url = https://dns.example.com:53443
   dns_technitium_token = 0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef
   # optional
   # dns_technitium_zone = example.com

The path to this file can be provided interactively or using the
``--dns-technitium-credentials`` command-line argument. Certbot records the
path to this file for use during renewal, but does not store the file's
contents.

.. caution::
   You should protect this API token as you would the password to your
   Technitium DNS Server. Users who can read this file can use the token to
   issue arbitrary API calls on your behalf. Users who can cause Certbot to
   run using these credentials can complete a ``dns-01`` challenge to acquire
   new certificates or revoke existing certificates for associated domains,
   even if those domains aren't being managed by this server.

Certbot will emit a warning if it detects that the credentials file can be
accessed by other users on your system. The warning reads "Unsafe permissions
on credentials configuration file", followed by the path to the credentials
file. This warning will be emitted each time Certbot uses the credentials file,
including for renewal, and cannot be silenced except by addressing the issue
(e.g., by using a command like ``chmod 600`` to restrict access to the file).


Examples
--------

.. code-block:: bash
   :caption: To acquire a certificate for ``example.com``

   certbot certonly \\
     --dns-technitium \\
     --dns-technitium-credentials ~/.secrets/certbot/technitium.ini \\
     -d example.com

.. code-block:: bash
   :caption: To acquire a wildcard certificate for ``*.example.com``, waiting
             120 seconds for DNS propagation

   certbot certonly \\
     --dns-technitium \\
     --dns-technitium-credentials ~/.secrets/certbot/technitium.ini \\
     --dns-technitium-propagation-seconds 120 \\
     -d '*.example.com'

"""
