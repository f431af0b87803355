"""Stand-in for the ESP32 firmware: report a DHT22 reading, then sleep as told."""
import argparse, logging, random, time, threading, requests
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

DEVICE_TS_FORMAT = "%Y-%m-%d %H:%M:%S"

def build_payload(now=None):
    now = now or datetime.now(timezone.utc)
    return {
        "temp": round(random.uniform(18.0, 32.0), 1),
        "hum": round(random.uniform(30.0, 80.0), 1),
        "timestamp": now.astimezone(timezone.utc).strftime(DEVICE_TS_FORMAT),
    }

def report_once(session, base_url, timeout=5.0):
    """Post one reading and return the delay the server suggests."""
    r = session.post(f"{base_url}/api/telemetry", json=build_payload(), timeout=timeout)
    r.raise_for_status()
    r = session.get(f"{base_url}/api/update-time", timeout=timeout)
    r.raise_for_status()
    return int(r.json()["seconds"])

def one_device(device_id, base_url, fallback_seconds, stop=None, sleep=time.sleep):
    session = requests.Session()
    while stop is None or not stop.is_set():
        try:
            seconds = report_once(session, base_url)
            logger.info(f"[{device_id}] reading sent, next in {seconds}s")
        except (requests.RequestException, KeyError, ValueError) as e:
            logger.warning(f"[{device_id}] report failed: {e}")
            seconds = fallback_seconds
        sleep(seconds)

def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--devices", type=int, default=1)
    p.add_argument("--base-url", default="http://localhost:3000")
    p.add_argument("--fallback-seconds", type=int, default=30, help="sleep used when the server cannot be reached")
    p.add_argument("--once", action="store_true", help="send a single reading per device and exit")
    args = p.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    if args.once:
        session = requests.Session()
        for i in range(args.devices):
            seconds = report_once(session, args.base_url)
            print(f"dev-{i+1}: next report in {seconds}s")
        return

    print(f"Starting {args.devices} devices against {args.base_url}")
    threads = []
    for i in range(args.devices):
        t = threading.Thread(target=one_device, args=(f"dev-{i+1}", args.base_url, args.fallback_seconds), daemon=True)
        t.start()
        threads.append(t)
    for t in threads:
        t.join()

if __name__ == "__main__":
    main()
