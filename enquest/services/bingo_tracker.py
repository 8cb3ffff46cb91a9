from dataclasses import dataclass
from typing import List, Optional

from enquest.errors import BadRequestError, NotFoundError
from enquest.models import (
    BOARD_SIZE, EventParticipant, User, empty_completion, normalize_completion, now_iso
)
from enquest.utils.firestore_store import DELETE_FIELD
from enquest.utils.logging_utils import get_logger

logger = get_logger("BINGO")

# Rows, columns, diagonals of the 3x3 board
BINGO_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

MESSAGE_BINGO = "Bingo!"
MESSAGE_COMPLETED = "Mission completed"
MESSAGE_UNDONE = "Mission unmarked"


def check_bingo(completed) -> bool:
    return any(all(completed[i] for i in line) for line in BINGO_LINES)


def parse_index(raw) -> int:
    """Cell index from a URL segment; anything but an integer in 0..8 is a client error."""
    try:
        index = int(str(raw).strip())
    except (TypeError, ValueError):
        raise BadRequestError("Invalid bingo index")
    if index < 0 or index >= BOARD_SIZE:
        raise BadRequestError("Invalid bingo index")
    return index


@dataclass
class ToggleResult:
    completed: List[bool]
    has_bingo: bool
    cell_done: bool
    # "set" when the line was just achieved, "clear" when it was just lost
    achievement_change: Optional[str] = None

    @property
    def message(self):
        if not self.cell_done:
            return MESSAGE_UNDONE
        return MESSAGE_BINGO if self.has_bingo else MESSAGE_COMPLETED


def toggle_cell(completed, index, had_bingo=False) -> ToggleResult:
    """
    Flip one cell and re-evaluate every line. Pure: the input vector is not
    modified.
    """
    cells = normalize_completion(completed)
    if index < 0 or index >= BOARD_SIZE:
        raise BadRequestError("Invalid bingo index")
    cells[index] = not cells[index]
    has_bingo = check_bingo(cells)

    change = None
    if has_bingo and not had_bingo:
        change = "set"
    elif not has_bingo and had_bingo:
        change = "clear"
    return ToggleResult(completed=cells, has_bingo=has_bingo, cell_done=cells[index], achievement_change=change)


def reset_updates(board):
    """Document updates for a freshly generated board with progress cleared."""
    return {
        "bingoBoard": [m.to_dict() for m in board],
        "bingoCompleted": empty_completion(),
        "hasBingo": False,
        "bingoReady": True,
        "bingoAchievedAt": DELETE_FIELD,
    }


def mission_text(mission):
    if isinstance(mission, str):
        return mission
    if isinstance(mission, dict):
        return mission.get("text")
    return None


class BingoTracker:
    """Board state per participant: toggles, (re)generation, admin overviews, photo evidence."""

    def __init__(self, store, generator):
        self.store = store
        self.generator = generator

    def _participant_doc(self, event_id, user_id):
        data = self.store.get_participant(event_id, user_id)
        if data is None:
            raise NotFoundError("Participant not found")
        return data

    # ------------------ TOGGLE ------------------
    def toggle(self, event_id, user_id, raw_index):
        index = parse_index(raw_index)
        data = self._participant_doc(event_id, user_id)

        result = toggle_cell(data.get("bingoCompleted"), index, had_bingo=bool(data.get("hasBingo")))

        updates = {"bingoCompleted": result.completed, "hasBingo": result.has_bingo}
        if result.achievement_change == "set":
            updates["bingoAchievedAt"] = now_iso()
            logger.info(f"[BINGO] {user_id} achieved bingo in event {event_id}")
        elif result.achievement_change == "clear":
            updates["bingoAchievedAt"] = DELETE_FIELD
            logger.info(f"[BINGO] {user_id} lost bingo in event {event_id}")
        self.store.update_participant(event_id, user_id, updates)

        return {
            "success": True,
            "hasBingo": result.has_bingo,
            "bingoCompleted": result.completed,
            "message": result.message,
        }

    def get_state(self, event_id, user_id):
        data = self._participant_doc(event_id, user_id)
        participant = EventParticipant.from_doc(user_id, data)
        return {
            "bingoBoard": [m.to_dict() for m in participant.bingo_board],
            "bingoCompleted": participant.bingo_completed,
            "hasBingo": participant.has_bingo,
            "bingoReady": participant.bingo_ready,
            "bingoAchievedAt": participant.bingo_achieved_at,
        }

    # ------------------ GENERATION ------------------
    def regenerate(self, event_id, user_id):
        """Generate a new board for one participant and reset their progress."""
        data = self._participant_doc(event_id, user_id)
        user_data = self.store.get_user(user_id)
        if user_data is None:
            raise NotFoundError("User not found")

        user = User.from_doc(user_id, user_data)
        board = self.generator.bingo_missions(user, data.get("answers") or {})
        self.store.update_participant(event_id, user_id, reset_updates(board))
        logger.info(f"[BINGO] Regenerated board for {user_id} in event {event_id}")
        return [m.to_dict() for m in board]

    def regenerate_all(self, event_id):
        """
        Generate boards for every participant of the event. Admins are skipped
        (they keep the default board); failures are reported per participant
        and do not stop the run.
        """
        participants = self.store.list_participants(event_id)
        if not participants:
            raise NotFoundError("No participants found")

        logger.info(f"[BINGO] Bulk generation for {len(participants)} participant(s) in event {event_id}")
        results = []
        success_count = 0
        error_count = 0
        skipped_count = 0

        for user_id, data in participants:
            user_name = data.get("userName")
            try:
                user_data = self.store.get_user(user_id)
                if user_data is None:
                    logger.error(f"[BINGO] User not found: {user_id}")
                    error_count += 1
                    results.append({"userId": user_id, "userName": user_name, "success": False, "error": "User not found"})
                    continue

                user = User.from_doc(user_id, user_data)
                if user.is_admin:
                    logger.debug(f"[BINGO] Skipping admin user: {user.name}")
                    skipped_count += 1
                    results.append({
                        "userId": user_id, "userName": user_name,
                        "success": True, "skipped": True, "reason": "Admin user"
                    })
                    continue

                board = self.generator.bingo_missions(user, data.get("answers") or {})
                self.store.update_participant(event_id, user_id, reset_updates(board))
                success_count += 1
                results.append({
                    "userId": user_id, "userName": user_name,
                    "success": True, "bingoBoard": [m.to_dict() for m in board]
                })
            except Exception as e:
                logger.exception(f"[BINGO] Error generating missions for user {user_id}: {e}")
                error_count += 1
                results.append({"userId": user_id, "userName": user_name, "success": False, "error": str(e)})

        logger.info(
            f"[BINGO] Bulk generation completed: {success_count} success, "
            f"{error_count} errors, {skipped_count} skipped"
        )
        return {
            "message": "Bulk bingo mission generation completed",
            "summary": {
                "total": len(participants),
                "success": success_count,
                "errors": error_count,
                "skipped": skipped_count,
            },
            "results": results,
        }

    # ------------------ ADMIN OVERVIEW ------------------
    def status(self, event_id):
        """Every participant's progress, bingo achievers first, then by progress."""
        rows = []
        for user_id, data in self.store.list_participants(event_id):
            participant = EventParticipant.from_doc(user_id, data)
            user_data = self.store.get_user(user_id) or {}
            completed_count = participant.completed_count
            rows.append({
                "userId": user_id,
                "userName": user_data.get("name") or participant.user_name,
                "hasBingo": participant.has_bingo,
                "completedCount": completed_count,
                "totalCount": BOARD_SIZE,
                "progress": round(completed_count / BOARD_SIZE * 100),
                "bingoAchievedAt": participant.bingo_achieved_at,
                "bingoCompleted": participant.bingo_completed,
                "bingoBoard": [m.to_dict() for m in participant.bingo_board],
                "bingoReady": participant.bingo_ready,
            })
        rows.sort(key=lambda r: (not r["hasBingo"], -r["progress"]))
        return rows

    # ------------------ PHOTOS ------------------
    def upload_photo(self, event_id, user_id, raw_index, image_data):
        index = parse_index(raw_index)
        if not image_data:
            raise BadRequestError("Image data is required")
        self._participant_doc(event_id, user_id)
        self.store.update_participant(event_id, user_id, {
            f"photoUploads.{index}": {"imageData": image_data, "uploadedAt": now_iso()}
        })
        logger.info(f"[PHOTO] {user_id} uploaded evidence for mission {index} in event {event_id}")

    def photos(self, event_id):
        photos = []
        for user_id, data in self.store.list_participants(event_id):
            board = data.get("bingoBoard") or []
            for key, photo in (data.get("photoUploads") or {}).items():
                try:
                    index = int(key)
                except (TypeError, ValueError):
                    index = None
                if index is None or index < 0 or not isinstance(photo, dict):
                    logger.warning(f"[PHOTO] Skipping malformed upload {key!r} for {user_id} in event {event_id}")
                    continue
                photos.append({
                    "userId": user_id,
                    "userName": data.get("userName"),
                    "bingoIndex": index,
                    "missionText": mission_text(board[index]) if index < len(board) else None,
                    "imageData": photo.get("imageData"),
                    "uploadedAt": photo.get("uploadedAt"),
                })
        photos.sort(key=lambda p: p["uploadedAt"] or "", reverse=True)
        return photos
