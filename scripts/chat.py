"""Chat with the tutor from a terminal.

Usage:
    python -m scripts.chat --email student@dlh.example --password Student123!
    python -m scripts.chat --token <access token> --course computer-science
    python -m scripts.chat --token <access token> --session 12

Type a message and press enter. ``/new`` starts a new conversation,
``/quit`` exits.
"""

import argparse
import asyncio
import sys

import httpx

from smart_tutor.client.chat_client import TutorChatClient
from smart_tutor.client.transcript import Transcript


async def _login(base_url: str, email: str, password: str) -> str:
    async with httpx.AsyncClient(base_url=base_url) as http:
        response = await http.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        response.raise_for_status()
        return response.json()["data"]["access_token"]


class _LivePrinter:
    """Prints only the part of the accumulated answer not yet shown."""

    def __init__(self) -> None:
        self.shown = 0

    def __call__(self, accumulated: str) -> None:
        sys.stdout.write(accumulated[self.shown :])
        sys.stdout.flush()
        self.shown = len(accumulated)


async def run(
    base_url: str,
    token: str,
    course_id: str | None,
    session_id: int | None,
) -> None:
    timeout = httpx.Timeout(None, connect=10.0)
    headers = {"Authorization": f"Bearer {token}"}
    async with httpx.AsyncClient(
        base_url=base_url, headers=headers, timeout=timeout
    ) as http:
        client = TutorChatClient(http, notify=lambda text: print(f"\n[{text}]"))
        if session_id is not None:
            transcript = await client.open_session(session_id)
            print(f"--- {transcript.title} ---")
            for message in transcript.messages:
                print(f"{message.role}> {message.content}\n")
        else:
            transcript = Transcript()

        while True:
            try:
                text = await asyncio.to_thread(input, "you> ")
            except EOFError:
                break
            if text.strip() == "/quit":
                break
            if text.strip() == "/new":
                transcript.reset()
                continue

            sys.stdout.write("tutor> ")
            await client.send(
                transcript, text, course_id=course_id, on_update=_LivePrinter()
            )
            print("\n")


def main() -> None:
    parser = argparse.ArgumentParser(description="Terminal tutor chat")
    parser.add_argument("--base-url", default="http://localhost:8004")
    parser.add_argument("--token", help="Access token (skips login)")
    parser.add_argument("--email")
    parser.add_argument("--password")
    parser.add_argument("--course", dest="course_id", help="Course slug, e.g. mathematics")
    parser.add_argument("--session", dest="session_id", type=int, help="Resume a session")
    args = parser.parse_args()

    token = args.token
    if token is None:
        if not (args.email and args.password):
            parser.error("either --token or --email and --password are required")
        token = asyncio.run(_login(args.base_url, args.email, args.password))

    asyncio.run(run(args.base_url, token, args.course_id, args.session_id))


if __name__ == "__main__":
    main()
