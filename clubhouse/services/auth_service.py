"""
Identity and authentication resolver.

A user signs in with an email or phone number. The same identifier may have
a player record in several teams; login finds all of them before deciding
whether to sign straight in or ask the user which team to open.

Expected failures are reported as LoginResult / RegistrationResult values
carrying an ErrorKind and never raise.
"""
import logging
from typing import List, Optional, Tuple

from ..models import (
    ErrorKind, LoginResult, RegistrationResult, PendingTeamSelection, Player, PlayerRole, Team,
)
from ..utils import (
    EMAIL, PHONE, DEFAULT_SPORT, SECURITY_QUESTIONS, SPORT_POSITIONS,
    classify_identifier, new_id, normalize_email,
)
from .credential_service import CredentialService
from .team_store import TeamStore
from .team_switcher import TeamSwitcher

logger = logging.getLogger(__name__)

Match = Tuple[Team, Player]


class AuthService:
    """
    Sign users in and out and manage their credentials.

    Attributes:
        store: Entity store with every team
        switcher: Used to activate or create teams
        credentials: Hashes and verifies secrets
    """

    def __init__(
        self,
        store: TeamStore,
        switcher: Optional[TeamSwitcher] = None,
        credentials: Optional[CredentialService] = None,
    ):
        self.store = store
        self.switcher = switcher or TeamSwitcher(store)
        self.credentials = credentials or CredentialService()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    @staticmethod
    def _matches(player: Player, kind: str, value: str) -> bool:
        if kind == PHONE:
            return player.matches_phone(value)
        return player.matches_email(value)

    def _team_matches(self, kind: str, value: str) -> List[Match]:
        """Every (team, player) pair whose player uses the identifier."""
        matches = []
        for team in self.store.state.teams:
            player = next((p for p in team.players if self._matches(p, kind, value)), None)
            if player is not None:
                matches.append((team, player))
        return matches

    def _legacy_match(self, kind: str, value: str) -> Optional[Player]:
        return next(
            (p for p in self.store.state.unscoped_players if self._matches(p, kind, value)),
            None,
        )

    def find_player(self, identifier: str) -> Optional[Player]:
        """
        Find a player by email or phone.

        The active team is searched first, then every other team, then the
        legacy unscoped roster.
        """
        kind, value = classify_identifier(identifier)
        if not value:
            return None
        active = self.store.active_team
        if active is not None:
            for player in active.players:
                if self._matches(player, kind, value):
                    return player
        matches = self._team_matches(kind, value)
        if matches:
            return matches[0][1]
        return self._legacy_match(kind, value)

    def _remember_identity(self, kind: str, value: str) -> None:
        state = self.store.state
        if kind == PHONE:
            state.user_phone, state.user_email = value, None
        else:
            state.user_email, state.user_phone = value, None

    # ------------------------------------------------------------------
    # Login / logout
    # ------------------------------------------------------------------
    def login(self, identifier: str, secret: str) -> LoginResult:
        """
        Sign in with an email or phone number and a secret.

        Args:
            identifier: Email address or phone number as typed
            secret: Login secret

        Returns:
            LoginResult. When the identifier belongs to several teams the
            result has multiple_teams set and a team choice is left pending;
            no team is activated.
        """
        kind, value = classify_identifier(identifier)
        matches = self._team_matches(kind, value) if value else []
        legacy = self._legacy_match(kind, value) if value else None
        state = self.store.state

        if not matches:
            if legacy is None:
                return LoginResult.failure(ErrorKind.NOT_FOUND)
            if not legacy.is_registered:
                return LoginResult.failure(ErrorKind.NOT_REGISTERED)
            if not self.credentials.verify_secret(legacy.credential_hash, secret):
                return LoginResult.failure(ErrorKind.INCORRECT_CREDENTIAL)
            state.current_player_id = legacy.id
            state.is_logged_in = True
            self._remember_identity(kind, value)
            self.store.commit()
            logger.info("Signed in legacy player %s", legacy.id)
            return LoginResult(success=True, player_id=legacy.id)

        if not any(player.is_registered for _, player in matches) and not (legacy and legacy.is_registered):
            return LoginResult.failure(ErrorKind.NOT_REGISTERED)

        valid = any(
            self.credentials.verify_secret(player.credential_hash, secret) for _, player in matches
        )
        if not valid and legacy is not None and any(not p.is_registered for _, p in matches):
            # A pre-team credential only covers team records that never got their own
            valid = self.credentials.verify_secret(legacy.credential_hash, secret)
        if not valid:
            return LoginResult.failure(ErrorKind.INCORRECT_CREDENTIAL)

        self._remember_identity(kind, value)
        if len(matches) > 1:
            state.pending_selection = PendingTeamSelection(
                identifier=value, team_ids=[team.id for team, _ in matches]
            )
            self.store.commit()
            logger.info("Identifier matches %d teams; awaiting team choice", len(matches))
            return LoginResult(success=True, multiple_teams=True, team_count=len(matches))

        team, player = matches[0]
        self.switcher.activate(team, player)
        state.is_logged_in = True
        self.store.commit()
        logger.info("Signed in player %s on team %s", player.id, team.id)
        return LoginResult(success=True, player_id=player.id)

    def logout(self) -> None:
        """Sign the user out, keeping every team on the device."""
        self.store.state.clear_session()
        self.store.commit()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_admin(
        self,
        name: str,
        email: str,
        secret: str,
        team_name: str,
        sport: str = DEFAULT_SPORT,
        phone: Optional[str] = None,
        jersey_number: Optional[str] = None,
        is_coach: bool = False,
    ) -> RegistrationResult:
        """
        Create a new team with its first admin.

        Args:
            name: Full name of the admin; the first word is the first name
            email: Admin's email address
            secret: Login secret
            team_name: Name of the new team
            sport: Sport the team plays
            phone: Optional phone number
            jersey_number: Jersey number (players only, defaults to "1")
            is_coach: Register as a non-playing coach

        Returns:
            RegistrationResult with the new player and team ids
        """
        email = normalize_email(email)
        if not name.strip() or not email or not secret or not team_name.strip():
            return RegistrationResult.failure(ErrorKind.INVALID_INPUT)
        if sport not in SPORT_POSITIONS:
            return RegistrationResult.failure(ErrorKind.INVALID_INPUT)
        existing = self._team_matches(EMAIL, email)
        legacy = self._legacy_match(EMAIL, email)
        if any(p.is_registered for _, p in existing) or (legacy and legacy.is_registered):
            return RegistrationResult.failure(ErrorKind.ACCOUNT_EXISTS)

        first_name, _, last_name = name.strip().partition(" ")
        roles = [PlayerRole.ADMIN, PlayerRole.COACH] if is_coach else [PlayerRole.ADMIN]
        player = Player(
            id=new_id(),
            first_name=first_name,
            last_name=last_name.strip(),
            email=email,
            phone=phone or None,
            credential_hash=self.credentials.hash_secret(secret),
            number="" if is_coach else (jersey_number or "1"),
            positions=["Coach"] if is_coach else [SPORT_POSITIONS[sport][0]],
            roles=roles,
        )
        team_id = self.switcher.create_new_team(team_name.strip(), sport, player)
        return RegistrationResult(success=True, player_id=player.id, team_id=team_id)

    def register_invited_player(self, identifier: str, secret: str) -> RegistrationResult:
        """
        Claim an invitation by setting a secret on an invited player.

        Every invited record for the identifier receives the credential, so
        the user can sign in to each team they were added to. The active
        team is preferred when choosing which team to open.

        Args:
            identifier: Email or phone the admin invited
            secret: Login secret to set

        Returns:
            RegistrationResult with the signed-in player and team ids
        """
        if not secret:
            return RegistrationResult.failure(ErrorKind.INVALID_INPUT)
        kind, value = classify_identifier(identifier)
        matches = self._team_matches(kind, value) if value else []
        if not matches:
            return RegistrationResult.failure(ErrorKind.INVITATION_NOT_FOUND)
        invited = [(team, player) for team, player in matches if not player.is_registered]
        if not invited:
            return RegistrationResult.failure(ErrorKind.ACCOUNT_EXISTS)

        credential_hash = self.credentials.hash_secret(secret)
        for _, player in invited:
            player.credential_hash = credential_hash

        active_id = self.store.state.active_team_id
        team, player = next(((t, p) for t, p in invited if t.id == active_id), invited[0])
        self._remember_identity(kind, value)
        self.switcher.activate(team, player)
        self.store.state.is_logged_in = True
        self.store.commit()
        logger.info("Player %s registered on %d team(s)", player.id, len(invited))
        return RegistrationResult(success=True, player_id=player.id, team_id=team.id)

    # ------------------------------------------------------------------
    # Credential recovery
    # ------------------------------------------------------------------
    def set_security_question(self, player_id: str, question: str, answer: str) -> bool:
        """
        Store a recovery question and hashed answer for a player.

        Raises:
            ValueError: If the question is not one of the offered questions
                or the answer is empty
        """
        if question not in SECURITY_QUESTIONS:
            raise ValueError(f"Unknown security question: {question}")
        player = self.store.find_player(player_id)
        if player is None:
            return False
        player.security_question = question
        player.security_answer_hash = self.credentials.hash_answer(answer)
        self.store.commit()
        return True

    def reset_credential(self, identifier: str, answer: str, new_secret: str) -> RegistrationResult:
        """
        Replace a forgotten secret after answering the security question.

        Args:
            identifier: Email or phone of the account
            answer: Answer to the security question (case-insensitive)
            new_secret: Secret to set

        Returns:
            RegistrationResult with the player id on success
        """
        if not new_secret:
            return RegistrationResult.failure(ErrorKind.INVALID_INPUT)
        kind, value = classify_identifier(identifier)
        records = [p for _, p in self._team_matches(kind, value)] if value else []
        legacy = self._legacy_match(kind, value) if value else None
        if legacy is not None:
            records.append(legacy)
        if not records:
            return RegistrationResult.failure(ErrorKind.NOT_FOUND)
        with_question = [p for p in records if p.security_answer_hash]
        if not with_question:
            return RegistrationResult.failure(ErrorKind.NO_SECURITY_QUESTION)
        verified = [p for p in with_question
                    if self.credentials.verify_answer(p.security_answer_hash, answer)]
        if not verified:
            return RegistrationResult.failure(ErrorKind.INCORRECT_SECURITY_ANSWER)

        credential_hash = self.credentials.hash_secret(new_secret)
        for player in records:
            if player.is_registered:
                player.credential_hash = credential_hash
        self.store.commit()
        logger.info("Credential reset for player %s", verified[0].id)
        return RegistrationResult(success=True, player_id=verified[0].id)

    # ------------------------------------------------------------------
    # Account removal and role checks
    # ------------------------------------------------------------------
    def delete_account(self) -> bool:
        """
        Remove the signed-in user from every team and sign them out.

        Their game and event responses, notifications to or from them, and
        their chat messages are removed as well.

        Returns:
            False when nobody is signed in
        """
        state = self.store.state
        if not state.is_logged_in:
            return False
        for team in state.teams:
            is_active = team.id == state.active_team_id
            player = next(
                (p for p in team.players
                 if state.is_session_user(p) or (is_active and p.id == state.current_player_id)),
                None,
            )
            if player is not None:
                self._remove_from_team(team, player.id)
        state.unscoped_players = [
            p for p in state.unscoped_players
            if not state.is_session_user(p) and p.id != state.current_player_id
        ]
        state.active_team_id = None
        state.clear_session()
        self.store.commit()
        logger.info("Account deleted")
        return True

    @staticmethod
    def _remove_from_team(team: Team, player_id: str) -> None:
        team.players = [p for p in team.players if p.id != player_id]
        for game in team.games:
            game.invited_players = [p for p in game.invited_players if p != player_id]
            game.clear_response(player_id)
            game.checkout_notes.pop(player_id, None)
        for event in team.events:
            event.invited_players = [p for p in event.invited_players if p != player_id]
            event.confirmed_players = [p for p in event.confirmed_players if p != player_id]
            event.declined_players = [p for p in event.declined_players if p != player_id]
            event.declined_notes.pop(player_id, None)
        team.notifications = [
            n for n in team.notifications
            if n.to_player_id != player_id and n.from_player_id != player_id
        ]
        team.chat_messages = [m for m in team.chat_messages if m.sender_id != player_id]
        team.chat_last_read_at.pop(player_id, None)

    def is_admin(self) -> bool:
        """Whether the signed-in player is an admin."""
        return self.store.is_admin()

    def can_manage_team(self) -> bool:
        """Whether the signed-in player is an admin or captain."""
        return self.store.can_manage_team()

    @staticmethod
    def has_role(player: Player, role: PlayerRole) -> bool:
        """Whether a player holds a role."""
        return player.has_role(role)
