"""
Genera el hash bcrypt de una contraseña, para cargar usuarios a mano.

    python -m mesas.utils.hash_generator "mi-clave"
"""
import argparse

from mesas.services.auth import get_password_hash, verify_password


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate a bcrypt password hash")
    parser.add_argument("password", help="Plain text password")
    parser.add_argument(
        "--check",
        metavar="HASH",
        help="Verify the password against an existing hash instead",
    )
    args = parser.parse_args(argv)

    if args.check:
        ok = verify_password(args.password, args.check)
        print("OK" if ok else "MISMATCH")
        return 0 if ok else 1

    print(get_password_hash(args.password))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
