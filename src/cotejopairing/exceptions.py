"""Exceptions for use in Cotejo Pairing"""

# Cotejo Pairing
# Copyright (C) 2025  Cotejo Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.


# ========== Base Application Exception ==========


class CotejoPairingException(Exception):
    """Base exception for all Cotejo Pairing errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Pairing Exceptions ==========


class PairingException(CotejoPairingException):
    """Base exception for pairing-related errors."""

    pass


class InsufficientTeamsException(PairingException):
    """Raised when contribution balancing needs at least two teams with competitors."""

    pass


class OddPoolException(PairingException):
    """Raised when the exact matcher is handed an odd number of competitors."""

    pass


class UnknownStrategyException(PairingException):
    """Raised when a matching strategy name is not registered."""

    pass


# ========== Ledger Exceptions ==========


class LedgerException(CotejoPairingException):
    """Base exception for fight ledger errors."""

    pass


class UnknownFightException(LedgerException):
    """Raised when a fight id is not present in the ledger."""

    pass


class AlreadyDecidedException(LedgerException):
    """Raised when recording an outcome for a fight that is no longer pending."""

    pass


class InvalidOutcomeException(LedgerException):
    """Raised when an outcome or its duration is invalid."""

    pass


class DuplicateFightException(LedgerException):
    """Raised when the same fight id is added to the ledger twice."""

    pass


class FightNumberingException(LedgerException):
    """Raised when stored fight numbers do not run 1..n without gaps."""

    pass


# ========== Tournament Exceptions ==========


class TournamentException(CotejoPairingException):
    """Base exception for tournament-related errors."""

    pass


class TournamentStateException(TournamentException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


class UnknownTeamException(TournamentException):
    """Raised when a competitor references a team that is not registered."""

    pass


class DuplicateCompetitorException(TournamentException):
    """Raised when attempting to add a competitor that already exists."""

    pass


# ========== Validation Exceptions ==========


class ValidationException(CotejoPairingException):
    """Base exception for validation errors."""

    pass


class InvalidCompetitorDataException(ValidationException):
    """Raised when competitor data is invalid or incomplete."""

    pass


# ========== File/Resource Exceptions ==========


class ResourceException(CotejoPairingException):
    """Base exception for resource-related errors."""

    pass


class FileLoadException(ResourceException):
    """Raised when a file cannot be loaded."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(CotejoPairingException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
