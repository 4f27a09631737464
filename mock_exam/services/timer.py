"""
services/timer.py

시험 카운트다운 타이머.

구성:
  - Scheduler        : 반복 틱 실행기 인터페이스 (start / stop / running)
  - ThreadScheduler  : 데몬 스레드에서 interval 초마다 콜백 실행 (실사용)
  - ManualScheduler  : advance(seconds) 로 시간을 직접 흘리는 가짜 시계 (테스트용)
  - CountdownTimer   : 스케줄러를 감싸 세션당 하나의 타이머만 돌도록 보장하고,
                       ExamState.time_left 를 1씩 감소시킨다.

틱 횟수 기반 감소이므로 실제 경과 시간과 다를 수 있다 (탭 일시정지, 부하 등).
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from config import TICK_INTERVAL
from mock_exam.models.session_state import ExamState

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class Scheduler(ABC):
    """반복 틱 실행기."""

    @abstractmethod
    def start(self, interval: float, callback: TickCallback) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @property
    @abstractmethod
    def running(self) -> bool:
        ...


class ThreadScheduler(Scheduler):
    """interval 초마다 callback 을 호출하는 데몬 스레드."""

    def __init__(self) -> None:
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    def start(self, interval: float, callback: TickCallback) -> None:
        self.stop()
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(interval, callback, stop_event),
            daemon=True,
            name="exam-timer",
        )
        self._stop_event = stop_event
        self._thread = thread
        thread.start()

    def stop(self) -> None:
        # join 하지 않는다: 틱 콜백 안에서 stop() 이 호출될 수 있다
        if self._stop_event is not None:
            self._stop_event.set()
        self._thread = None
        self._stop_event = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @staticmethod
    def _run(interval: float, callback: TickCallback, stop_event: threading.Event) -> None:
        while not stop_event.wait(interval):
            try:
                callback()
            except Exception:
                logger.exception("타이머 틱 처리 중 오류")


class ManualScheduler(Scheduler):
    """
    가짜 시계. advance() 로 흘려보낸 시간만큼 틱을 발생시킨다.
    콜백 도중 stop() 되면 남은 틱은 버린다.
    """

    def __init__(self) -> None:
        self._interval = TICK_INTERVAL
        self._callback: Optional[TickCallback] = None
        self._elapsed = 0.0

    def start(self, interval: float, callback: TickCallback) -> None:
        self._interval = interval
        self._callback = callback
        self._elapsed = 0.0

    def stop(self) -> None:
        self._callback = None
        self._elapsed = 0.0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def advance(self, seconds: float) -> int:
        """seconds 만큼 시간을 흘리고 실제로 발생한 틱 수를 반환."""
        fired = 0
        self._elapsed += seconds
        while self._callback is not None and self._elapsed >= self._interval:
            self._elapsed -= self._interval
            callback = self._callback
            callback()
            fired += 1
        return fired


class CountdownTimer:
    """
    세션 소유 카운트다운 타이머.

    start() 는 항상 이전 타이머를 먼저 멈추므로 동시에 두 개가 돌지 않는다
    (중복 감소, 중복 자동 제출 방지).
    """

    def __init__(self, scheduler: Optional[Scheduler] = None, interval: float = TICK_INTERVAL) -> None:
        self._scheduler = scheduler or ThreadScheduler()
        self._interval = interval

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self, callback: TickCallback) -> None:
        self.stop()
        self._scheduler.start(self._interval, callback)
        logger.info("타이머 시작")

    def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.stop()
            logger.info("타이머 정지")

    def count_down(self, state: ExamState) -> bool:
        """
        남은 시간을 1초 줄인다.

        Returns:
            True  — 시간이 0에 도달함. 타이머는 이미 정지된 상태이며
                    호출자가 자동 제출을 수행해야 한다.
            False — 아직 시간이 남아 있음.
        """
        if state.time_left is None:
            return False
        if state.time_left <= 1:
            state.time_left = 0
            self.stop()
            return True
        state.time_left -= 1
        return False
