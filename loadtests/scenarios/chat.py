"""Support chat load test scenarios.

A customer opens a conversation, exchanges a few messages and closes it.
WebSocket streams are not exercised here; polling the message list stands in
for the live subscription.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import chat_message, sign_up_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ChatState


class ChatJourney(SequentialTaskSet):
    """Sign Up -> Sign In -> Start Conversation -> Post Messages -> Poll -> Close.

    Generates events: UserRegistered, ConversationStarted, MessagePosted (x1-4),
    ConversationClosed.
    """

    def on_start(self):
        self.state = ChatState()

    @task
    def sign_in(self):
        payload = sign_up_data()
        resp = self.client.post("/auth/sign-up", json=payload, name="POST /auth/sign-up")
        if resp.status_code != 201:
            self.interrupt()
        with self.client.post(
            "/auth/sign-in",
            json={"email": payload["email"], "password": payload["password"]},
            catch_response=True,
            name="POST /auth/sign-in",
        ) as resp:
            if resp.status_code == 200:
                self.state.access_token = resp.json()["access_token"]
            else:
                resp.failure(f"Sign in failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def start_conversation(self):
        with self.client.post(
            "/chat/conversations",
            json={},
            headers=self.state.headers,
            catch_response=True,
            name="POST /chat/conversations",
        ) as resp:
            if resp.status_code == 201:
                self.state.conversation_id = resp.json()["conversation_id"]
            else:
                resp.failure(f"Start conversation failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def post_messages(self):
        for _ in range(random.randint(1, 4)):
            with self.client.post(
                f"/chat/conversations/{self.state.conversation_id}/messages",
                json={"message": chat_message()},
                headers=self.state.headers,
                catch_response=True,
                name="POST /chat/conversations/{id}/messages",
            ) as resp:
                if resp.status_code == 201:
                    self.state.messages_sent += 1
                else:
                    resp.failure(f"Post message failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def poll_messages(self):
        with self.client.get(
            f"/chat/conversations/{self.state.conversation_id}/messages",
            headers=self.state.headers,
            catch_response=True,
            name="GET /chat/conversations/{id}/messages",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Poll failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif len(resp.json()) < self.state.messages_sent:
                resp.failure(f"Expected {self.state.messages_sent} messages, got {len(resp.json())}")

    @task
    def close_conversation(self):
        with self.client.post(
            f"/chat/conversations/{self.state.conversation_id}/close",
            headers=self.state.headers,
            catch_response=True,
            name="POST /chat/conversations/{id}/close",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Close failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ChatUser(HttpUser):
    wait_time = between(2, 5)
    tasks = [ChatJourney]
