"""
Common PAN-OS fault signatures.

Read-only lookup tables of regex sources and knowledge-base links that
runbook authors reference when writing patterns.
"""

from types import MappingProxyType


SIGNATURES = MappingProxyType({
    # Connectivity
    "ssl_handshake_failed": r"(?i)ssl.*handshake.*(fail|error)|tls.*error",
    "connection_refused": r"(?i)connection.*refused|connect.*failed|unable.*to.*connect",
    "authentication_failed": r"(?i)auth.*fail|authentication.*error|invalid.*credentials",
    "peer_unreachable": r"(?i)peer.*unreachable|cannot.*reach.*peer|peer.*timeout",

    # High availability
    "ha_state_non_functional": r"(?i)state:\s*(suspended|non-functional|initial)",
    "ha_sync_failed": r"(?i)sync.*(fail|error)|synchronization.*problem",
    "ha_link_down": r"(?i)ha[12].*down|link.*down|monitoring.*failed",

    # Commit / configuration
    "commit_failed": r"(?i)commit.*fail|result:\s*fail",
    "validation_error": r"(?i)validation.*error|invalid.*configuration",
    "object_reference": r"(?i)object.*not.*found|reference.*error|undefined.*object",
    "config_locked": r"(?i)config.*lock|locked.*by|configuration.*is.*locked",

    # Licensing
    "license_expired": r"(?i)license.*expir|expired:\s*yes|license.*invalid",

    # Resources
    "high_cpu": r"(?i)cpu.*([89]\d|100)%|cpu.*utilization.*high",
    "high_memory": r"(?i)memory.*([89]\d|100)%|memory.*utilization.*high",
    "oom_killer": r"(?i)oom.*kill|out.*of.*memory|memory.*exhausted",
})


_KB_BASE = "https://knowledgebase.paloaltonetworks.com/KCSArticleDetail?id="

KB_ARTICLES = MappingProxyType({
    "panorama_ssl": _KB_BASE + "kA10g000000ClGo",
    "panorama_connect": _KB_BASE + "kA10g000000ClVr",
    "ha_config": _KB_BASE + "kA10g000000ClH4",
    "ha_sync": _KB_BASE + "kA10g000000ClHE",
    "commit_fail": _KB_BASE + "kA10g000000ClIa",
    "licensing": _KB_BASE + "kA10g000000ClJ5",
    "resource_usage": _KB_BASE + "kA10g000000ClJK",
})
