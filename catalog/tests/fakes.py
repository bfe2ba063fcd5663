from __future__ import annotations

from dataclasses import dataclass, replace
from http import HTTPStatus

from catalog.application.account_manager import AccountManager
from catalog.application.interfaces import ArticleCollection, ArticleStore, MailSender, ObjectStore
from catalog.application.results import OperationResult
from catalog.application.services.access_tokens import JwtAccessTokenIssuer, TokenSettings
from catalog.domain.users.entities import TokenType, User, VerificationToken
from catalog.domain.users.exceptions import UsernameTakenError
from catalog.domain.users.repositories import (
    PasswordHasher,
    UserRepository,
    VerificationTokenRepository,
)
from catalog.domain.users.updates import UserFieldUpdate, column_value
from catalog.shared.utils.clock import unix_now

ASSET_BASE_URL = "http://assets.test/static"
ACCESS_SECRET = "access-secret-for-tests-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789abcdef"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    def find_by_username(self, username: str) -> User | None:
        return self.users.get(username)

    def add(self, user: User) -> User:
        if user.username in self.users:
            raise UsernameTakenError()
        self.users[user.username] = user
        return user

    def update(self, username: str, change: UserFieldUpdate) -> bool:
        column, value = column_value(change)
        user = self.users.get(username)
        if user is None:
            return False
        self.users[username] = replace(user, **{column: value})
        return True

    def delete(self, username: str) -> bool:
        return self.users.pop(username, None) is not None


class InMemoryTokenRepository(VerificationTokenRepository):
    def __init__(self) -> None:
        self.tokens: dict[str, VerificationToken] = {}

    def create(self, token: VerificationToken) -> None:
        self.tokens[token.value] = token

    def get(self, value: str) -> VerificationToken | None:
        return self.tokens.get(value)

    def delete(self, value: str) -> None:
        self.tokens.pop(value, None)

    def delete_all_for_user(self, username: str) -> bool:
        for value, token in list(self.tokens.items()):
            if token.username == username:
                del self.tokens[value]
        return True

    def of_type(self, username: str, token_type: TokenType) -> list[VerificationToken]:
        return [
            token
            for token in self.tokens.values()
            if token.username == username and token.type == token_type
        ]


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class FakeClock:
    def __init__(self, start: int | None = None) -> None:
        self.now = unix_now() if start is None else start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@dataclass
class SentMail:
    kind: str
    email: str
    username: str
    secret: str


class RecordingMailSender(MailSender):
    def __init__(self, *, deliver: bool = True) -> None:
        self.deliver = deliver
        self.sent: list[SentMail] = []

    async def _record(self, kind: str, email: str, username: str, secret: str) -> bool:
        self.sent.append(SentMail(kind, email, username, secret))
        return self.deliver

    async def send_verification(self, email: str, username: str, code: str) -> bool:
        return await self._record("verification", email, username, code)

    async def send_email_change_verification(self, email: str, username: str, code: str) -> bool:
        return await self._record("email_change", email, username, code)

    async def send_password_reset(self, email: str, username: str, code: str) -> bool:
        return await self._record("password_reset", email, username, code)

    async def send_new_password(self, email: str, username: str, password: str) -> bool:
        return await self._record("new_password", email, username, password)

    def last(self, kind: str) -> SentMail:
        return [mail for mail in self.sent if mail.kind == kind][-1]


class InMemoryObjectStore(ObjectStore):
    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, int, int]] = {}
        self.removed: list[str] = []
        self.fail_store = False
        self.fail_remove = False

    async def store(self, object_id: str, image_data: bytes, width: int, height: int) -> bool:
        if self.fail_store:
            return False
        self.objects[object_id] = (image_data, width, height)
        return True

    async def remove(self, object_id: str) -> bool:
        if self.fail_remove:
            return False
        self.removed.append(object_id)
        self.objects.pop(object_id, None)
        return True


@dataclass
class StoredArticle:
    author: str
    author_profile_pic: str


class InMemoryArticleStore(ArticleStore):
    def __init__(self) -> None:
        self.collections: dict[ArticleCollection, dict[str, StoredArticle]] = {
            collection: {} for collection in ArticleCollection
        }
        self.removal_result: OperationResult | None = None

    def add(self, collection: ArticleCollection, article_id: str, author: str, pic: str) -> None:
        self.collections[collection][article_id] = StoredArticle(author, pic)

    def by_author(self, username: str) -> list[StoredArticle]:
        return [
            article
            for articles in self.collections.values()
            for article in articles.values()
            if article.author == username
        ]

    async def query_by_author(self, collection: ArticleCollection, username: str) -> list[str]:
        return [
            article_id
            for article_id, article in self.collections[collection].items()
            if article.author == username
        ]

    async def update_author_picture_link(
        self, collection: ArticleCollection, article_id: str, new_url: str
    ) -> None:
        self.collections[collection][article_id].author_profile_pic = new_url

    async def remove_all_by_user(self, username: str) -> OperationResult:
        if self.removal_result is not None:
            return self.removal_result
        for articles in self.collections.values():
            for article_id, article in list(articles.items()):
                if article.author == username:
                    del articles[article_id]
        return OperationResult.success("articles removed")


def token_settings() -> TokenSettings:
    return TokenSettings(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@dataclass
class Harness:
    users: InMemoryUserRepository
    tokens: InMemoryTokenRepository
    mail: RecordingMailSender
    objects: InMemoryObjectStore
    articles: InMemoryArticleStore
    clock: FakeClock
    issuer: JwtAccessTokenIssuer
    manager: AccountManager

    def verification_code(self, username: str) -> str:
        return self.tokens.of_type(username, TokenType.EMAIL_VERIFICATION)[-1].value

    def expect(self, result: OperationResult, status: HTTPStatus) -> OperationResult:
        assert result.status == status, result.to_envelope()
        return result


def build_harness(*, hasher: PasswordHasher | None = None) -> Harness:
    users = InMemoryUserRepository()
    tokens = InMemoryTokenRepository()
    mail = RecordingMailSender()
    objects = InMemoryObjectStore()
    articles = InMemoryArticleStore()
    clock = FakeClock()
    issuer = JwtAccessTokenIssuer(token_settings(), clock=clock)
    manager = AccountManager(
        users=users,
        tokens=tokens,
        password_hasher=hasher or DeterministicHasher(),
        access_tokens=issuer,
        objects=objects,
        mail=mail,
        articles=articles,
        asset_base_url=ASSET_BASE_URL,
        clock=clock,
    )
    return Harness(users, tokens, mail, objects, articles, clock, issuer, manager)
