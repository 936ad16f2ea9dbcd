import socket

import dns.exception
import dns.inet
import dns.message
import dns.query
import dns.rcode
import dns.rdatatype

from dnspin.env import dns_timeout
from dnspin.debug import debug, log
from dnspin.results import Resolved, NoRecord, LookupFailed

DNS_PORT = 53

# Answers that mean "the server is authoritative about this name"
DEFINITIVE_RCODES = (dns.rcode.NOERROR, dns.rcode.NXDOMAIN)


class DNSResolver:
    def __init__(self, server, timeout=None):
        self.server = server
        self.timeout = timeout if timeout is not None else dns_timeout()

    def server_address(self):
        if dns.inet.is_address(self.server):
            return self.server
        return socket.gethostbyname(self.server)

    @debug('lookup')
    def resolve(self, hostname):
        try:
            address = self.server_address()
            query = dns.message.make_query(hostname, dns.rdatatype.A)
            response, _ = dns.query.udp_with_fallback(query, address, timeout=self.timeout, port=DNS_PORT)
        except (dns.exception.DNSException, OSError) as e:
            log(f"DNS error resolving {hostname} A via {self.server}: {e}", 'warn')
            return LookupFailed(e)

        rcode = response.rcode()
        if rcode not in DEFINITIVE_RCODES:
            error = f"{self.server} answered {dns.rcode.to_text(rcode)}"
            log(f"DNS error resolving {hostname} A: {error}", 'warn')
            return LookupFailed(error)

        for rrset in response.answer:
            if rrset.rdtype == dns.rdatatype.A and len(rrset) > 0:
                # First address only, no rotation between records
                return Resolved(next(iter(rrset)).address)

        # we reached the server and it has no record
        return NoRecord()


def resolve(hostname, server, timeout=None):
    return DNSResolver(server, timeout).resolve(hostname)
