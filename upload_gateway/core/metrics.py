from prometheus_client import Counter

REQUEST_COUNTER = Counter("upload_gateway_requests_total", "Total API requests", ["path", "status"])
RELAY_COUNTER = Counter("upload_gateway_relays_total", "Proxied uploads by outcome", ["outcome"])
RELAY_BYTES = Counter("upload_gateway_relayed_bytes_total", "Bytes streamed to the object store")
