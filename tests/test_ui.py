"""
Dashboard and login pages, driven through the form posts a browser would send.
"""

from jobmindr.main import app

from conftest import make_payload

API = "/api/job-applications"


def _seed(client, **overrides):
    resp = client.post(API, json=make_payload(**overrides))
    assert resp.status_code == 201
    # rows written behind the dashboard's back; drop its read cache
    if app.state.api_client is not None:
        app.state.api_client.invalidate()
    return resp.json()


def _rows(client):
    return client.get(API).json()


class TestLogin:
    def test_root_and_dashboard_redirect_to_login(self, client):
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/login"
        assert client.get("/dashboard", follow_redirects=False).headers["location"] == "/login"

    def test_login_page(self, client):
        resp = client.get("/login")
        assert resp.status_code == 200
        assert "Welcome to JobMindr" in resp.text

    def test_missing_fields(self, client):
        resp = client.post("/login", data={"email": "", "password": ""})
        assert resp.status_code == 400
        assert "Email is required" in resp.text
        assert "Password is required" in resp.text

    def test_bad_email(self, client):
        resp = client.post("/login", data={"email": "nope", "password": "pw"})
        assert resp.status_code == 400
        assert "Please enter a valid email address" in resp.text
        assert 'value="nope"' in resp.text

    def test_success_sets_cookie_and_lands_on_dashboard(self, client):
        resp = client.post("/login", data={"email": "a@b.com", "password": "pw"}, follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard"
        assert "jobmindr_user" in resp.headers["set-cookie"]

        page = client.get("/dashboard")
        assert page.status_code == 200
        assert "a@b.com" in page.text
        assert client.get("/login", follow_redirects=False).headers["location"] == "/dashboard"

    def test_logout(self, logged_in):
        resp = logged_in.post("/logout", follow_redirects=False)
        assert resp.headers["location"] == "/login"
        logged_in.cookies.clear()
        assert logged_in.get("/dashboard", follow_redirects=False).headers["location"] == "/login"


class TestDashboard:
    def test_empty_state(self, logged_in):
        page = logged_in.get("/dashboard")
        assert "No job applications found" in page.text
        assert "0 applications" in page.text

    def test_lists_rows_and_companies(self, logged_in):
        _seed(logged_in, companyName="Google", jobTitle="SRE")
        _seed(logged_in, companyName="Amazon", jobTitle="SDE")
        page = logged_in.get("/dashboard").text
        assert "2 applications" in page
        assert "SRE" in page and "SDE" in page
        assert '<option value="Amazon"' in page

    def test_filter_by_company(self, logged_in):
        _seed(logged_in, companyName="Google", jobTitle="SRE")
        _seed(logged_in, companyName="Amazon", jobTitle="SDE")
        page = logged_in.get("/dashboard", params={"companyName": "Google"}).text
        assert "1 applications" in page
        assert "SRE" in page and "SDE" not in page

    def test_sort_links_with_rows(self, logged_in):
        _seed(logged_in)
        page = logged_in.get("/dashboard", params={"sortBy": "jobTitle", "sortOrder": "asc"}).text
        assert 'href="/dashboard?sortBy=jobTitle&amp;sortOrder=desc"' in page
        assert 'href="/dashboard?sortBy=companyName&amp;sortOrder=asc"' in page
        assert "↑" in page

    def test_invalid_date_filter_is_ignored(self, logged_in):
        _seed(logged_in)
        page = logged_in.get("/dashboard", params={"dateApplied": "soon"})
        assert page.status_code == 200
        assert "Invalid filter value ignored." in page.text
        assert "1 applications" in page.text

    def test_toast_from_query(self, logged_in):
        page = logged_in.get("/dashboard", params={"toast": "Hello there", "toastType": "error"})
        assert 'class="toast error"' in page.text
        assert "Hello there" in page.text


class TestCreateForm:
    def test_create(self, logged_in):
        form = make_payload(employmentType="", contactEmail="", applicationClosingDate="")
        resp = logged_in.post("/dashboard/applications", data=form)
        assert resp.status_code == 200
        assert "Job application added successfully!" in resp.text
        assert "Backend Engineer" in resp.text

        (row,) = _rows(logged_in)
        assert row["companyName"] == "Google"
        assert row["contactEmail"] is None

    def test_invalid_form_rerenders_with_errors(self, logged_in):
        form = make_payload(jobTitle="", contactEmail="bad")
        resp = logged_in.post("/dashboard/applications", data=form)
        assert resp.status_code == 400
        assert "Please fix the highlighted fields." in resp.text
        assert "Invalid email format" in resp.text
        assert 'value="bad"' in resp.text
        assert _rows(logged_in) == []

    def test_filters_survive_create(self, logged_in):
        resp = logged_in.post(
            "/dashboard/applications?companyName=Google&status=&dateApplied=&sortBy=jobTitle&sortOrder=asc",
            data=make_payload(),
            follow_redirects=False,
        )
        assert resp.status_code == 303
        location = resp.headers["location"]
        assert location.startswith("/dashboard?companyName=Google&sortBy=jobTitle&sortOrder=asc&toast=")


class TestStatusUpdate:
    def test_modal_prefilled(self, logged_in):
        row = _seed(logged_in, applicationStatus="Interviewing")
        page = logged_in.get(f"/dashboard/applications/{row['id']}/status").text
        assert "Update Application Status" in page
        assert '<option value="Interviewing" selected>' in page

    def test_modal_for_missing_row(self, logged_in):
        resp = logged_in.get("/dashboard/applications/999/status")
        assert "Job application not found." in resp.text

    def test_update(self, logged_in):
        row = _seed(logged_in)
        resp = logged_in.post(f"/dashboard/applications/{row['id']}/status", data={"applicationStatus": "Offer"})
        assert "Application status updated successfully!" in resp.text
        (updated,) = _rows(logged_in)
        assert updated["applicationStatus"] == "Offer"
        assert updated["jobTitle"] == row["jobTitle"]

    def test_update_failure(self, logged_in):
        resp = logged_in.post("/dashboard/applications/999/status", data={"applicationStatus": "Offer"})
        assert "Failed to update application status." in resp.text


class TestDelete:
    def test_confirm_then_delete(self, logged_in):
        a = _seed(logged_in, jobTitle="A")
        b = _seed(logged_in, jobTitle="B")
        _seed(logged_in, jobTitle="C")

        confirm = logged_in.post("/dashboard/delete/confirm", data={"ids": [str(a["id"]), str(b["id"])]})
        assert confirm.status_code == 200
        assert "Are you sure you want to delete 2 job application(s)?" in confirm.text

        done = logged_in.post("/dashboard/delete", data={"ids": [str(a["id"]), str(b["id"])]})
        assert "2 job application(s) deleted successfully!" in done.text
        assert [r["jobTitle"] for r in _rows(logged_in)] == ["C"]

    def test_nothing_selected(self, logged_in):
        resp = logged_in.post("/dashboard/delete/confirm", data={})
        assert "Select at least one application to delete." in resp.text

    def test_select_all_uses_current_filters(self, logged_in):
        _seed(logged_in, companyName="Google")
        _seed(logged_in, companyName="Google", jobTitle="Other")
        _seed(logged_in, companyName="Amazon")

        confirm = logged_in.post("/dashboard/delete/confirm?companyName=Google", data={"select_all": "1"})
        assert "delete 2 job application(s)" in confirm.text

    def test_cancel_keeps_selection(self, logged_in):
        a = _seed(logged_in)
        confirm = logged_in.post("/dashboard/delete/confirm", data={"ids": [str(a["id"])]})
        assert f'href="/dashboard?selected={a["id"]}"' in confirm.text
        page = logged_in.get("/dashboard", params={"selected": str(a["id"])}).text
        assert f'value="{a["id"]}" class="row-check" checked' in page


class TestStatusModalLookup:
    def test_uses_the_filtered_page_listing(self, logged_in):
        row = _seed(logged_in, companyName="Google")
        _seed(logged_in, companyName="Amazon")
        logged_in.get("/dashboard", params={"companyName": "Google"})

        page = logged_in.get(f"/dashboard/applications/{row['id']}/status", params={"companyName": "Google"})
        assert "Update Application Status" in page.text
        assert ("/job-applications", ()) not in app.state.api_client._cache

    def test_falls_back_to_full_listing(self, logged_in):
        _seed(logged_in, companyName="Google")
        other = _seed(logged_in, companyName="Amazon", jobTitle="SDE")
        page = logged_in.get(f"/dashboard/applications/{other['id']}/status", params={"companyName": "Google"})
        assert "Update Application Status" in page.text
        assert "SDE at Amazon" in page.text
