import argparse

from tiersync.core.config import settings
from tiersync.services.stream_tokens import sign_stream_url


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print a signed /stream relay link")
    parser.add_argument("url", help="upstream media URL")
    parser.add_argument("--ttl-min", type=int, default=settings.stream_max_min)
    parser.add_argument("--relay", default="/api/v1/stream", help="relay endpoint base URL")
    args = parser.parse_args(argv)

    if not settings.token_secret:
        print("TOKEN_SECRET is not set")
        return 1
    if args.ttl_min > settings.stream_max_min:
        print(f"--ttl-min must be <= {settings.stream_max_min}")
        return 1

    print(
        sign_stream_url(
            args.relay,
            args.url,
            secret=settings.token_secret.get_secret_value(),
            ttl_minutes=args.ttl_min,
        )
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
