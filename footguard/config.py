"""Application configuration loaded from environment variables."""

from __future__ import annotations

from datetime import timedelta

from pydantic_settings import BaseSettings

from footguard.core.thresholds import RiskWeights, Thresholds


class Settings(BaseSettings):
    app_name: str = "footguard"
    debug: bool = False
    log_level: str = "INFO"

    # Sessions & buffers
    history_size: int = 30
    risk_history_size: int = 100
    max_stored_alerts: int = 100
    session_ttl_minutes: int = 120
    event_queue_size: int = 100
    alert_cooldown_minutes: float = 5.0

    # Temperature (°C)
    temp_warning_high: float = 35.0
    temp_critical_high: float = 37.0
    temp_warning_low: float = 27.0
    temp_critical_low: float = 25.0
    temp_asymmetry_warning: float = 2.0
    temp_asymmetry_critical: float = 3.5
    temp_rate_of_change_warning: float = 1.5

    # Pressure (kPa)
    pressure_warning: float = 80.0
    pressure_high: float = 100.0
    pressure_critical: float = 120.0
    pressure_spike: float = 30.0

    # Blood oxygen (%)
    spo2_normal: float = 95.0
    spo2_warning: float = 92.0
    spo2_low: float = 90.0
    spo2_critical: float = 85.0

    # Heart rate (BPM)
    hr_normal_min: int = 60
    hr_normal_max: int = 100
    hr_warning_low: int = 50
    hr_warning_high: int = 110
    hr_critical_low: int = 40
    hr_critical_high: int = 130

    # Gait
    gait_stability_warning: float = 0.7
    gait_stability_critical: float = 0.5
    step_frequency_min: int = 80
    step_frequency_max: int = 130
    step_frequency_tolerance: int = 20

    # Battery (%)
    battery_low: int = 20
    battery_critical: int = 10

    # Risk score weights
    weight_temperature: float = 0.30
    weight_pressure: float = 0.35
    weight_circulation: float = 0.20
    weight_gait: float = 0.15

    model_config = {"env_prefix": "FOOTGUARD_"}

    @property
    def alert_cooldown(self) -> timedelta:
        return timedelta(minutes=self.alert_cooldown_minutes)

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(minutes=self.session_ttl_minutes)

    def thresholds(self) -> Thresholds:
        return Thresholds(
            temp_warning_high=self.temp_warning_high,
            temp_critical_high=self.temp_critical_high,
            temp_warning_low=self.temp_warning_low,
            temp_critical_low=self.temp_critical_low,
            temp_asymmetry_warning=self.temp_asymmetry_warning,
            temp_asymmetry_critical=self.temp_asymmetry_critical,
            temp_rate_of_change_warning=self.temp_rate_of_change_warning,
            pressure_warning=self.pressure_warning,
            pressure_high=self.pressure_high,
            pressure_critical=self.pressure_critical,
            pressure_spike=self.pressure_spike,
            spo2_normal=self.spo2_normal,
            spo2_warning=self.spo2_warning,
            spo2_low=self.spo2_low,
            spo2_critical=self.spo2_critical,
            hr_normal_min=self.hr_normal_min,
            hr_normal_max=self.hr_normal_max,
            hr_warning_low=self.hr_warning_low,
            hr_warning_high=self.hr_warning_high,
            hr_critical_low=self.hr_critical_low,
            hr_critical_high=self.hr_critical_high,
            gait_stability_warning=self.gait_stability_warning,
            gait_stability_critical=self.gait_stability_critical,
            step_frequency_min=self.step_frequency_min,
            step_frequency_max=self.step_frequency_max,
            step_frequency_tolerance=self.step_frequency_tolerance,
            battery_low=self.battery_low,
            battery_critical=self.battery_critical,
        )

    def risk_weights(self) -> RiskWeights:
        return RiskWeights(
            temperature=self.weight_temperature,
            pressure=self.weight_pressure,
            circulation=self.weight_circulation,
            gait=self.weight_gait,
        )


settings = Settings()
